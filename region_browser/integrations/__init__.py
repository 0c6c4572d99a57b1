"""Clients for the remote places service."""

from .city_dataset import CityDatasetFetcher
from .places_api import PlacesApiClient
from .state_search import StateSearchProvider

__all__ = ["CityDatasetFetcher", "PlacesApiClient", "StateSearchProvider"]
