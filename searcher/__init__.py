"""MEV searcher API - bid and bundle submission over HTTP."""

from searcher.api.main import SearcherServer, create_app, serve
from searcher.service import SearcherService

__version__ = "0.1.0"
__all__ = ["SearcherServer", "SearcherService", "create_app", "serve", "__version__"]
