"""
Remote resource (JSONPlaceholder-compatible posts/users/comments).

Components:
- models.py: Post, User, Comment, EnrichedPost, PageResult
- api_client.py: httpx request function + per-resource APIs
- posts.py: PostsAggregator (join posts with users, client-side search, paging)
"""
