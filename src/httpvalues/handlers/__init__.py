"""
=============================================================================
HANDLERS MODULE
=============================================================================

Responders built on top of the plain response values.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Module        │ Contents                                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │ static.py     │ File, Dir, NotFound                                 │
    │ filters.py    │ Filter, Dirs, FilterFunc - access control for Dir   │
    │ recovery.py   │ recover, serve_safely - faults to 500 responses     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
USAGE EXAMPLES
=============================================================================

    from httpvalues.handlers import Dir, Dirs, File

    assets = Dir("site", filter=Dirs(["site/css", "site/js"]))
    index = File("site/index.html")

    def handler(request):
        return assets.handle_opt(request) or index.handle(request)

=============================================================================
"""

from .filters import Filter, Dirs, FilterFunc, is_subpath
from .static import File, Dir, NotFound
from .recovery import recover, serve_safely, fault_responder

__all__ = [
    "Filter",
    "Dirs",
    "FilterFunc",
    "is_subpath",
    "File",
    "Dir",
    "NotFound",
    "recover",
    "serve_safely",
    "fault_responder",
]
