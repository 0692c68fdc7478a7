# exchange_indexer/storage/__init__.py
