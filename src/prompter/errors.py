from __future__ import annotations


class PrompterError(RuntimeError):
    """Base class for failures the CLIs report and exit on."""


class DatasetError(PrompterError):
    """The movie dataset is missing, unreadable or malformed (startup-fatal)."""


class RemoteServiceError(PrompterError):
    """The inference service failed to answer a candidate request."""
