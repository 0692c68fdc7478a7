# exchange_indexer/transform/__init__.py
