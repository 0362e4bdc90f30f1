"""
Detecting the library's own version.

The codebase does not contain the version directly, as it would require
code changes on every release. The version is taken from the installed
package's metadata, and is determined only once when the code is loaded.

Used for self-identification in the ``User-Agent`` header of API requests.
"""
from typing import Optional

version: Optional[str] = None

try:
    import importlib.metadata
except ImportError:
    pass
else:
    try:
        name, *_ = __name__.split('.')  # usually "kubewire", unless renamed/forked.
        version = importlib.metadata.version(name)
    except Exception:
        pass  # not installed, e.g. run from a source checkout.
