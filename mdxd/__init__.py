"""mdxd: REST daemon and CLI for mdx_library.

Thin transport layer. All build logic lives in mdx_library; this package
only validates requests, runs builds and shapes responses.
"""

__version__ = "0.1.0"
