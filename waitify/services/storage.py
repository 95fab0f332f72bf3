"""
Supabase Storage service for file uploads.
"""

import logging
import secrets
from typing import Optional

from database.connection import get_db

logger = logging.getLogger(__name__)

PRESCRIPTION_CONTENT_TYPES = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
}


class StorageService:
    """Service for managing file uploads to Supabase Storage."""

    MEDICAL_BUCKET = "medical"
    PROFILES_BUCKET = "profiles"

    @property
    def supabase(self):
        return get_db()

    def upload_file(
        self,
        bucket: str,
        path: str,
        file_data: bytes,
        content_type: str = "image/png",
        upsert: bool = True,
    ) -> str:
        """
        Upload a file to Supabase Storage.

        Args:
            bucket: The storage bucket name
            path: The file path within the bucket (e.g., "{user_id}/avatar.png")
            file_data: The file content as bytes
            content_type: The MIME type of the file
            upsert: Overwrite an existing object at the same path

        Returns:
            The public URL of the uploaded file
        """
        self.supabase.storage.from_(bucket).upload(
            path=path,
            file=file_data,
            file_options={
                "content-type": content_type,
                "cache-control": "3600",
                "upsert": "true" if upsert else "false",
            },
        )
        return self.get_public_url(bucket, path)

    def delete_file(self, bucket: str, path: str) -> bool:
        """Delete a file; False when the provider refuses."""
        try:
            self.supabase.storage.from_(bucket).remove([path])
            return True
        except Exception as e:
            logger.warning(f"Could not delete {bucket}/{path}: {e}")
            return False

    def get_public_url(self, bucket: str, path: str) -> str:
        return self.supabase.storage.from_(bucket).get_public_url(path)

    @staticmethod
    def prescription_path(patient_id: str, appointment_id: str, filename: str) -> str:
        """prescriptions/{patient}_{appointment}_{random}.{ext}"""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"prescriptions/{patient_id}_{appointment_id}_{secrets.token_hex(6)}.{ext}"

    def upload_prescription(
        self,
        patient_id: str,
        appointment_id: str,
        filename: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        """
        Upload a prescription document for an appointment.

        Never overwrites: every upload gets a fresh random suffix.

        Returns:
            The public URL of the uploaded document
        """
        path = self.prescription_path(patient_id, appointment_id, filename)
        return self.upload_file(
            bucket=self.MEDICAL_BUCKET,
            path=path,
            file_data=file_data,
            content_type=content_type,
            upsert=False,
        )

    def upload_profile_picture(
        self, user_id: str, file_data: bytes, content_type: str = "image/png"
    ) -> str:
        """Upload a profile picture and return its public URL."""
        ext = "png" if content_type == "image/png" else "jpg"
        return self.upload_file(
            bucket=self.PROFILES_BUCKET,
            path=f"{user_id}/avatar.{ext}",
            file_data=file_data,
            content_type=content_type,
        )

    def delete_profile_picture(self, user_id: str) -> bool:
        """Delete a user's profile picture (tries both extensions)."""
        deleted_png = self.delete_file(self.PROFILES_BUCKET, f"{user_id}/avatar.png")
        deleted_jpg = self.delete_file(self.PROFILES_BUCKET, f"{user_id}/avatar.jpg")
        return deleted_png or deleted_jpg


# Singleton instance
_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get or create the storage service singleton."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
