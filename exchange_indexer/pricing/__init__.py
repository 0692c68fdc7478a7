# exchange_indexer/pricing/__init__.py
