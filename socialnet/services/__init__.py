"""Services — entity access, login sessions, posts, users and the feed."""
