"""sysreview — systematic literature review study management.

Bibliographic ingestion, screening state and structured extraction /
quality-assessment answers for the studies of a systematic review.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sysreview")
except PackageNotFoundError:
    # Fallback for source-only usage before installation.
    __version__ = "0.1.0"
__license__ = "Apache-2.0"
