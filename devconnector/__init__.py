"""DevConnector - a small social network for developers (backend + client state).

- REST API (FastAPI): registration/login, profiles with experience/education,
  and a post/comment/like feed.
- Session tokens are stateless JWTs sent in the `x-auth-token` header.
- Profiles and posts are stored as versioned JSON documents; concurrent
  writes to the same document are rejected instead of lost.
- `devconnector.client` mirrors server resources in a reducer-driven store.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
