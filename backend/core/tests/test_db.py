import os
from unittest import mock, skipIf

from django.conf import settings
from django.test import SimpleTestCase, TestCase, TransactionTestCase, override_settings

from core import db
from core.db import QueryResult, bootstrap_schema, ping, query
from apps.societies.models import Society


class QueryGatewayTests(TestCase):
    def test_select_returns_rows_as_dicts(self):
        Society.objects.create(
            name="Gamma Co-op",
            registration_number="RC-GAMMA",
            society_type="housing",
            establishment_date="2018-03-03",
            address="3 Gamma Way",
        )

        result = query(
            "SELECT name, status FROM societies WHERE registration_number = %s",
            ["RC-GAMMA"],
        )

        self.assertIsInstance(result, QueryResult)
        self.assertEqual(result.rows, [{"name": "Gamma Co-op", "status": "pending"}])

    def test_parameters_are_not_interpolated(self):
        result = query(
            "SELECT COUNT(*) AS n FROM societies WHERE name = %s",
            ["x' OR '1'='1"],
        )
        self.assertEqual(result.rows[0]["n"], 0)

    def test_statement_without_result_set(self):
        Society.objects.create(
            name="Delta Co-op",
            registration_number="RC-DELTA",
            society_type="worker",
            establishment_date="2018-03-03",
            address="4 Delta Way",
        )

        result = query(
            "UPDATE societies SET address = %s WHERE registration_number = %s",
            ["5 Delta Way", "RC-DELTA"],
        )

        self.assertEqual(result.rows, [])
        self.assertEqual(result.rowcount, 1)

    def test_ping(self):
        self.assertTrue(ping())


class BootstrapSchemaTests(TransactionTestCase):
    def test_bootstrap_is_repeatable(self):
        bootstrap_schema()
        bootstrap_schema()
        self.assertTrue(ping())


class BootstrapOnStartTests(SimpleTestCase):
    @skipIf("AUTO_MIGRATE" in os.environ, "AUTO_MIGRATE set in the environment")
    def test_enabled_by_default(self):
        self.assertTrue(settings.AUTO_MIGRATE)

    def test_runs_bootstrap_when_enabled(self):
        with override_settings(AUTO_MIGRATE=True):
            with mock.patch.object(db, "bootstrap_schema") as bootstrap:
                self.assertTrue(db.bootstrap_on_start())

        bootstrap.assert_called_once_with(using="default")

    def test_skips_when_disabled(self):
        with override_settings(AUTO_MIGRATE=False):
            with mock.patch.object(db, "bootstrap_schema") as bootstrap:
                self.assertFalse(db.bootstrap_on_start())

        bootstrap.assert_not_called()
