"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".

Client records:
    clients/{client_id}         one document per ClientRecord
    client_emails/{email_key}   uniqueness claim, {client_id, email}

Media (chunked blob store, one bucket per prefix):
    {prefix}_files/{object_id}  filename, length, chunk_size, upload_date, content_type
    {prefix}_chunks/{object_id}-{n}  files_id, n, data
"""

COLLECTION_CLIENTS = "clients"
COLLECTION_CLIENT_EMAILS = "client_emails"


def media_files_collection(prefix: str) -> str:
    """Collection holding media metadata documents for a bucket prefix."""
    return f"{prefix}_files"


def media_chunks_collection(prefix: str) -> str:
    """Collection holding media chunk documents for a bucket prefix."""
    return f"{prefix}_chunks"
