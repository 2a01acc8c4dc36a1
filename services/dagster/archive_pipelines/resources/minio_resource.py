# =============================================================================
# MinIO Resource - S3-Compatible Archive Storage
# =============================================================================
# Provides whole-object text uploads and reads against the archive bucket.
# =============================================================================

import io

from dagster import ConfigurableResource
from minio import Minio
from minio.error import S3Error
from pydantic import Field

from libs.models import DestinationSettings


class MinIOResource(ConfigurableResource):
    """
    Dagster resource for the archive object store.

    Each upload is a single PUT of the complete object, so readers see either
    nothing or the full serialized record, never a partial write.

    Attributes:
        endpoint: Object store endpoint (host:port)
        access_key: Access key for authentication
        secret_key: Secret key for authentication
        use_ssl: Whether to use SSL/TLS (default: False)
        bucket: Archive bucket (container) name
    """

    endpoint: str = Field(..., description="Object store endpoint (host:port)")
    access_key: str = Field(..., description="Access key for authentication")
    secret_key: str = Field(..., description="Secret key for authentication")
    use_ssl: bool = Field(False, description="Whether to use SSL/TLS")
    bucket: str = Field(..., description="Archive bucket name")

    @classmethod
    def from_settings(cls, settings: DestinationSettings) -> "MinIOResource":
        """Build the resource from a parsed destination connection string."""
        return cls(
            endpoint=settings.endpoint,
            access_key=settings.access_key,
            secret_key=settings.secret_key,
            use_ssl=settings.use_ssl,
            bucket=settings.bucket,
        )

    def get_client(self) -> Minio:
        """
        Create a MinIO client instance.

        Returns:
            Configured Minio client
        """
        return Minio(
            self.endpoint,
            access_key=self.access_key,
            secret_key=self.secret_key,
            secure=self.use_ssl,
        )

    def put_text(self, key: str, text: str, content_type: str = "application/json") -> None:
        """
        Upload ``text`` as the complete object at ``key``, replacing any
        existing object.

        Raises:
            RuntimeError: If the archive bucket does not exist
            S3Error: For any other upload failure
        """
        client = self.get_client()
        data = text.encode("utf-8")

        try:
            client.put_object(
                self.bucket,
                key,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except S3Error as exc:
            if exc.code == "NoSuchBucket":
                raise RuntimeError(
                    f"Archive bucket '{self.bucket}' does not exist"
                ) from exc
            raise

    def get_text(self, key: str) -> str:
        """
        Download an archived object as text.

        Raises:
            RuntimeError: If the object does not exist
            S3Error: For any other download failure
        """
        client = self.get_client()

        try:
            response = client.get_object(self.bucket, key)
            try:
                data = response.read()
            finally:
                response.close()
                response.release_conn()
        except S3Error as exc:
            if exc.code == "NoSuchKey":
                raise RuntimeError(
                    f"Archive object '{key}' not found in bucket '{self.bucket}'"
                ) from exc
            raise

        return data.decode("utf-8")
