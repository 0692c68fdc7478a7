# exchange_indexer/types/model/__init__.py
