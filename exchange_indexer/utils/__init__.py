# exchange_indexer/utils/__init__.py
