# MotoWash database models
# Import all models here for SQLAlchemy discovery

from motowash.models.kv_entry import KvEntry   # noqa
