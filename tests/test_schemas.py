"""
Tests for the per-entity validation schemas.
"""

import pytest

from tms.models import TransportCompany
from tms.models.base import Base
from tms.schemas import (
    ClientSchema,
    DriverSchema,
    TransportCompanySchema,
    TransportServiceSchema,
    VehicleSchema,
    collect_violations,
    schema_for,
    validate_record,
)


SERVICE = {
    "transport_company_id": 1,
    "starting_location": "Sofia",
    "ending_location": "Varna",
    "starting_date": "2024-03-01",
    "ending_date": "2024-03-02",
    "price": "1500.50",
}


class TestCollectViolations:
    """Test collect_violations()"""

    def test_valid_record_has_no_violations(self):
        assert collect_violations(TransportCompanySchema, {"name": "Alpha"}) == []

    def test_missing_required_field(self):
        violations = collect_violations(TransportCompanySchema, {"address": "1 Main St"})

        assert len(violations) == 1
        assert violations[0].startswith("name:")

    def test_unknown_field_is_rejected(self):
        assert collect_violations(TransportCompanySchema, {"name": "Alpha", "owner": "Bob"})

    def test_bad_email(self):
        violations = collect_violations(
            ClientSchema, {"name": "Client", "telephone": "+359888123456", "email": "not-an-email"}
        )

        assert [v.split(":")[0] for v in violations] == ["email"]

    def test_negative_salary(self):
        violations = collect_violations(
            DriverSchema, {"first_name": "A", "family_name": "B", "salary": -1, "transport_company_id": 1}
        )

        assert violations and violations[0].startswith("salary:")

    def test_ending_before_starting_date(self):
        record = dict(SERVICE, ending_date="2024-02-28")

        violations = collect_violations(TransportServiceSchema, record)

        assert any("ending_date cannot be before starting_date" in v for v in violations)

    def test_unknown_vehicle_type(self):
        violations = collect_violations(
            VehicleSchema, {"registration_plate": "CA0001AA", "vehicle_type": "rocket", "transport_company_id": 1}
        )

        assert violations and violations[0].startswith("vehicle_type:")

    def test_non_object_record(self):
        assert collect_violations(TransportCompanySchema, "Alpha") == [
            "__root__: expected an object, got str"
        ]


class TestValidateRecord:
    """Test validate_record()"""

    def test_returns_coerced_values(self):
        data, violations = validate_record(TransportServiceSchema, SERVICE)

        assert violations == []
        assert str(data["price"]) == "1500.50"
        assert data["starting_date"].isoformat() == "2024-03-01"

    def test_unset_and_null_fields_are_dropped(self):
        data, _ = validate_record(TransportCompanySchema, {"name": "  Alpha  ", "address": None})

        assert data == {"name": "Alpha"}

    def test_enum_values_are_plain(self):
        data, _ = validate_record(
            VehicleSchema, {"registration_plate": "CA0001AA", "vehicle_type": "bus", "transport_company_id": 1}
        )

        assert data["vehicle_type"] == "bus"

    def test_invalid_returns_none(self):
        data, violations = validate_record(TransportCompanySchema, {})

        assert data is None
        assert violations


class TestSchemaFor:
    """Test schema_for()"""

    def test_registered_model(self):
        assert schema_for(TransportCompany) is TransportCompanySchema

    def test_unregistered_model(self):
        with pytest.raises(LookupError):
            schema_for(Base)
