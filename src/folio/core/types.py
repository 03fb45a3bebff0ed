"""Core type definitions."""

from typing import Any, NewType

# Absolute URL of a page view (e.g., "https://jane.github.io/site/about.html")
# Distinct from candidate paths, which may be relative references
PageURL = NewType("PageURL", str)

# Parsed JSON value as produced by json.loads
JSONValue = Any
