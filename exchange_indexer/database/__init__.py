# exchange_indexer/database/__init__.py
