"""Remote asset fetching."""

from vdc.fetch.remote import DownloadCache, RemoteFetcher

__all__ = ["DownloadCache", "RemoteFetcher"]
