"""Review protocol models."""
from sysreview.protocol.models import Criterion, Picoc, Protocol

__all__ = ["Criterion", "Picoc", "Protocol"]
