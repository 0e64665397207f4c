import boto3
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from config import GatewayConfig
from errors import NotConfigured, UpstreamFailure

GET, PUT = "GET", "PUT"
CLIENT_METHODS = {GET: "get_object", PUT: "put_object"}


@dataclass(frozen=True)
class ObjectSummary:
    key: str
    size: int
    last_modified: datetime

    def to_json(self):
        return {"key": self.key, "size": self.size, "lastModified": self.last_modified.isoformat()}


class ObjectStore(Protocol):
    """The two storage capabilities the gateway needs."""

    def list_objects(self) -> List[ObjectSummary]: ...

    def presign(self, operation: str, key: str, ttl: int, content_type: Optional[str] = None) -> str: ...


class S3ObjectStore:
    """
    ObjectStore over any S3-compatible endpoint (R2 by default).
    The boto3 client is built on first use; requests that never touch
    storage never need credentials.
    """

    def __init__(self, config: GatewayConfig, client=None):
        self.config = config
        self._client = client

    @property
    def client(self):
        if self._client is None:
            cfg = self.config
            if not cfg.bucket or not cfg.endpoint_url:
                raise NotConfigured("storage not configured")
            # R2 only speaks SigV4 and wants path-style addressing
            self._client = boto3.client(
                "s3",
                endpoint_url=cfg.endpoint_url,
                aws_access_key_id=cfg.access_key_id,
                aws_secret_access_key=cfg.secret_access_key,
                region_name=cfg.region,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        return self._client

    @property
    def bucket(self) -> str:
        if not self.config.bucket:
            raise NotConfigured("storage not configured")
        return self.config.bucket

    def list_objects(self) -> List[ObjectSummary]:
        files = []
        try:
            pages = self.client.get_paginator("list_objects_v2").paginate(Bucket=self.bucket)
            for page in pages:
                for obj in page.get("Contents", []):
                    files.append(ObjectSummary(obj["Key"], obj["Size"], obj["LastModified"]))
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure(f"list failed: {e}") from e
        return files

    def presign(self, operation: str, key: str, ttl: int, content_type: Optional[str] = None) -> str:
        params = {"Bucket": self.bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        try:
            return self.client.generate_presigned_url(
                ClientMethod=CLIENT_METHODS[operation],
                Params=params,
                ExpiresIn=ttl,
            )
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure(f"presign failed: {e}") from e
