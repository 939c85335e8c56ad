"""Testing utilities: a scripted mock master and a wired client."""

from .mock import MOCK_MASTER_URI, Invocation, MockMaster, mock_master

__all__ = ["MOCK_MASTER_URI", "Invocation", "MockMaster", "mock_master"]
