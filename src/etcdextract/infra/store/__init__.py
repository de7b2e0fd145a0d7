from __future__ import annotations

"""
Hierarchical Store Infrastructure.

Client for the etcd v2 keys API, the source of every snapshot.
"""

from etcdextract.infra.store.etcd_client import EtcdClient, StoreError

__all__ = [
    "EtcdClient",
    "StoreError",
]
