"""Station and trip feeds."""

from bikeflow.data.feed_client import DataLoadError, FeedClient
from bikeflow.data.loader import BaseDataLoader, LoadResult
from bikeflow.data.models import RowParseError, Station, Trip

__all__ = ["BaseDataLoader", "DataLoadError", "FeedClient", "LoadResult", "RowParseError", "Station", "Trip"]
