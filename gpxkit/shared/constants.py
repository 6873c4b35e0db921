"""
Wire-format constants shared by the GPX reader, writer and analytics.

This module has NO internal imports to avoid circular dependencies.
"""

from datetime import datetime, timezone

# Canonical GPX 1.1 namespace, used on write and as the read fallback
GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"

# The only version ever written
GPX_VERSION = "1.1"

# Sentinel for "no timestamp" in start/end time lookups
MIN_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
