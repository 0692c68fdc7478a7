# exchange_indexer/clients/__init__.py
