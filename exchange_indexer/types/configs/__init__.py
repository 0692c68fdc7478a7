# exchange_indexer/types/configs/__init__.py
