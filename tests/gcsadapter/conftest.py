"""
In-memory stand-ins for the parts of google-cloud-storage the adapter talks to.

FakeBucket keeps objects in a dict and mimics Bucket.blob, Bucket.list_blobs
(prefix/delimiter listing with pages and common prefixes) and Bucket.copy_blob.
FakeBlob and FakeACL mimic the Blob and ObjectACL methods used by the adapter,
raising google.api_core.exceptions.NotFound where the real client would.
Like BlobReader, the reader returned by FakeBlob.open() makes no request
until it is read.
"""

import copy
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import pytest
from google.api_core.exceptions import NotFound

from gcsadapter.google_storage import GoogleStorageAdapter

DEFAULT_UPDATED = "2024-01-02T03:04:05.000Z"

PREDEFINED_ACLS = {
    "projectPrivate": {},
    "private": {},
    "publicRead": {"allUsers": {"READER"}},
    "publicReadWrite": {"allUsers": {"READER", "WRITER"}},
    "authenticatedRead": {"allAuthenticatedUsers": {"READER"}},
}


@dataclass
class StoredObject:
    data: bytes
    content_type: Optional[str] = None
    metadata: Optional[dict] = None
    updated: str = DEFAULT_UPDATED
    acl: dict = field(default_factory=dict)
    fields: dict = field(default_factory=dict)


class FakeACLEntity:
    def __init__(self, roles=()):
        self.roles = set(roles)

    def get_roles(self):
        return set(self.roles)

    def grant_read(self):
        self.roles.add("READER")

    def revoke_read(self):
        self.roles.discard("READER")


class FakeACL:
    def __init__(self, blob):
        self.blob = blob
        self.entities = {}
        self.loaded = False

    def reload(self):
        record = self.blob._record()
        self.entities = {name: FakeACLEntity(roles) for name, roles in record.acl.items()}
        self.loaded = True

    def _ensure_loaded(self):
        if not self.loaded:
            self.reload()

    def get_entity(self, entity, default=None):
        self._ensure_loaded()
        return self.entities.get(entity, default)

    def all(self):
        self._ensure_loaded()
        return self.entities.setdefault("allUsers", FakeACLEntity())

    def save(self):
        record = self.blob._record()
        record.acl = {name: set(entity.roles) for name, entity in self.entities.items() if entity.roles}

    def save_predefined(self, predefined):
        if predefined not in PREDEFINED_ACLS:
            raise ValueError(f"invalid predefined acl {predefined}")
        self.blob._record().acl = copy.deepcopy(PREDEFINED_ACLS[predefined])
        self.reload()


class FakeBlob:
    def __init__(self, name, bucket):
        self.name = name
        self.bucket = bucket
        self.metadata = None
        self.cache_control = None
        self.content_disposition = None
        self.content_encoding = None
        self.content_language = None
        self.acl = FakeACL(self)

    def _record(self) -> StoredObject:
        try:
            return self.bucket.objects[self.name]
        except KeyError:
            raise NotFound(f"no such object: {self.bucket.name}/{self.name}")

    @property
    def _properties(self):
        record = self.bucket.objects.get(self.name)
        if record is None:
            return {"name": self.name}
        return {
            "name": self.name,
            "bucket": self.bucket.name,
            "size": str(len(record.data)),
            "contentType": record.content_type,
            "updated": record.updated,
            "metadata": record.metadata,
        }

    @property
    def size(self):
        record = self.bucket.objects.get(self.name)
        return None if record is None else len(record.data)

    @property
    def content_type(self):
        record = self.bucket.objects.get(self.name)
        return None if record is None else record.content_type

    @property
    def updated(self):
        record = self.bucket.objects.get(self.name)
        if record is None or record.updated is None:
            return None
        return datetime.fromisoformat(record.updated.replace("Z", "+00:00"))

    def exists(self):
        self.bucket.calls.append(("exists", self.name))
        return self.name in self.bucket.objects

    def reload(self):
        self.bucket.calls.append(("reload", self.name))
        self._record()

    def upload_from_string(self, data, content_type=None, predefined_acl=None):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._store(data, content_type, predefined_acl)

    def upload_from_file(self, file_obj, content_type=None, predefined_acl=None):
        self._store(file_obj.read(), content_type, predefined_acl)

    def _store(self, data, content_type, predefined_acl):
        self.bucket.calls.append(("upload", self.name, predefined_acl))
        acl = copy.deepcopy(PREDEFINED_ACLS[predefined_acl]) if predefined_acl else {}
        self.bucket.objects[self.name] = StoredObject(
            data=data,
            content_type=content_type or "application/octet-stream",
            metadata=self.metadata,
            acl=acl,
            fields={
                name: getattr(self, name)
                for name in ("cache_control", "content_disposition", "content_encoding", "content_language")
                if getattr(self, name) is not None
            },
        )

    def download_as_bytes(self):
        return self._record().data

    def open(self, mode="rb"):
        self.bucket.calls.append(("open", self.name))
        return FakeBlobReader(self)

    def delete(self):
        self._record()
        self.bucket.calls.append(("delete", self.name))
        del self.bucket.objects[self.name]


class FakeBlobReader(io.RawIOBase):
    def __init__(self, blob):
        self.blob = blob
        self._buffer = None

    def readable(self):
        return True

    def read(self, size=-1):
        if self._buffer is None:
            self._buffer = io.BytesIO(self.blob._record().data)
        return self._buffer.read(size)


class FakePage(list):
    def __init__(self, blobs, prefixes=()):
        super().__init__(blobs)
        self.prefixes = tuple(prefixes)


class FakeIterator:
    def __init__(self, pages):
        self._pages = pages

    @property
    def pages(self):
        for page in self._pages:
            yield page

    def __iter__(self):
        for page in self.pages:
            yield from page


class FakeBucket:
    def __init__(self, name="test-bucket", page_size=2):
        self.name = name
        self.page_size = page_size
        self.objects = {}
        self.calls = []

    def blob(self, name):
        return FakeBlob(name, self)

    def put(self, name, data=b"", acl=None, updated=DEFAULT_UPDATED, content_type="text/plain"):
        """Store an object directly, bypassing the adapter."""
        self.objects[name] = StoredObject(
            data=data,
            content_type=content_type,
            updated=updated,
            acl=acl or {},
        )

    def list_blobs(self, prefix=None, delimiter=None, max_results=None):
        prefix = prefix or ""
        self.calls.append(("list", prefix, delimiter))

        names = []
        prefixes = []
        for name in sorted(self.objects):
            if not name.startswith(prefix):
                continue

            rest = name[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[:rest.index(delimiter) + 1]
                if common not in prefixes:
                    prefixes.append(common)
                continue

            names.append(name)

        if max_results is not None:
            names = names[:max_results]

        blobs = [FakeBlob(name, self) for name in names]
        chunks = [blobs[i:i + self.page_size] for i in range(0, len(blobs), self.page_size)] or [[]]
        pages = [FakePage(chunk, prefixes if index == 0 else ()) for index, chunk in enumerate(chunks)]
        return FakeIterator(pages)

    def copy_blob(self, blob, destination_bucket, new_name=None):
        record = blob._record()
        self.calls.append(("copy", blob.name, new_name))
        new_name = new_name or blob.name
        destination_bucket.objects[new_name] = StoredObject(
            data=record.data,
            content_type=record.content_type,
            metadata=copy.deepcopy(record.metadata),
            updated=record.updated,
        )
        return FakeBlob(new_name, destination_bucket)


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def adapter(bucket):
    return GoogleStorageAdapter(object(), bucket)


@pytest.fixture
def prefixed_adapter(bucket):
    return GoogleStorageAdapter(object(), bucket, path_prefix="root")
