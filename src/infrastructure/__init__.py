"""
Infrastructure layer module.

Concrete implementations of the domain protocols.

Key components:
- busuanzi/: Busuanzi JSONP client and the counter sync built on it
- storage/: aiofiles-backed JSON document store
- auth/: Session token authentication
"""
