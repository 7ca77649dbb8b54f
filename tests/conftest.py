import pytest


class FakeReceiptStore:
    """In-memory stand-in for ReceiptStore with the same paging/update rules."""

    def __init__(self, rows):
        self.rows = [dict(r) for r in rows]
        self.fetches = []
        self.updates = []
        self.closed = False

    def fetch_unprocessed(self, limit, offset=0):
        self.fetches.append((limit, offset))
        pending = sorted(
            (r for r in self.rows if r.get("vat") is None),
            key=lambda r: (r["scanned_at"], r["id"]),
        )
        return [dict(r) for r in pending[offset:offset + limit]]

    def set_vat(self, receipt_id, vat):
        for row in self.rows:
            if row["id"] == receipt_id:
                if row.get("vat") is not None:
                    return False
                row["vat"] = vat
                self.updates.append((receipt_id, vat))
                return True
        return False

    def count_unprocessed(self):
        return sum(1 for r in self.rows if r.get("vat") is None)

    def close(self):
        self.closed = True

    def vat_of(self, receipt_id):
        return next(r["vat"] for r in self.rows if r["id"] == receipt_id)


@pytest.fixture
def fake_store_factory():
    return FakeReceiptStore
