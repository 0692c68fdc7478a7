# exchange_indexer/contracts/__init__.py
