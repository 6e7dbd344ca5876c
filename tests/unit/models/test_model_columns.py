"""Column types that must match the initial migration."""

from sqlalchemy import BigInteger

from app.models.repository import Repository


class TestRepositoryColumns:
    def test_github_id_is_bigint(self):
        # GitHub ids already exceed the int4 range
        column = Repository.__table__.c.github_id
        assert isinstance(column.type, BigInteger)
        assert column.nullable
