"""Client for dservice endpoints published as ENS text records, with HTTP failover."""

from dservice_client.client import DServiceClient
from dservice_client.core.config import Settings
from dservice_client.core.errors import (
    AllEndpointsFailedError,
    ClientError,
    DServiceError,
    ErrorReport,
    FetchTimeoutError,
    NoEndpointsError,
    ServiceDiscoveryError,
    TransientEndpointError,
)
from dservice_client.discovery import (
    DSERVICE_TEXT_KEY,
    EndpointDiscovery,
    TextRecord,
    TextRecordLookup,
    parse_endpoint_record,
)
from dservice_client.failover_fetcher import FailoverFetcher

__all__ = [
    "DSERVICE_TEXT_KEY",
    "AllEndpointsFailedError",
    "ClientError",
    "DServiceClient",
    "DServiceError",
    "EndpointDiscovery",
    "ErrorReport",
    "FailoverFetcher",
    "FetchTimeoutError",
    "NoEndpointsError",
    "ServiceDiscoveryError",
    "Settings",
    "TextRecord",
    "TextRecordLookup",
    "TransientEndpointError",
    "parse_endpoint_record",
]
