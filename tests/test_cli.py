import json
import os
import unittest
from unittest.mock import patch

from click.testing import CliRunner

from pybrcheck.cli import main
from pybrcheck.validators import CNPJValidator, CPFValidator


class TestCli(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        env = patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        for key in [k for k in os.environ if k.startswith("BRCHECK_")]:
            del os.environ[key]

    def test_validate_valid_cpf(self):
        result = self.runner.invoke(main, ["validate", "cpf", "529.982.247-25"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Passed", result.output)

    def test_validate_invalid_cpf_exits_with_error(self):
        result = self.runner.invoke(main, ["validate", "cpf", "529.982.247-26"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Failed", result.output)

    def test_validate_json(self):
        result = self.runner.invoke(main, ["validate", "email", "User@Example.com", "--json"])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertTrue(data["valid"])
        self.assertEqual(data["info"]["normalized"], "user@example.com")

    def test_validate_alias(self):
        result = self.runner.invoke(main, ["v", "password", "Xk9#mQ2@Lp"])
        self.assertEqual(result.exit_code, 0, result.output)

    def test_mask_and_unmask(self):
        result = self.runner.invoke(main, ["mask", "cnpj", "11222333000181"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "11.222.333/0001-81")

        result = self.runner.invoke(main, ["unmask", "cpf", "529.982.247-25"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "52998224725")

    def test_mask_wrong_length(self):
        result = self.runner.invoke(main, ["mask", "cpf", "123"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("CPF must have 11 digits", result.output)

    def test_format(self):
        self.assertEqual(self.runner.invoke(main, ["format", "cpf", "529.98"]).exit_code, 0)
        self.assertEqual(self.runner.invoke(main, ["format", "cnpj", ""]).exit_code, 0)
        self.assertEqual(self.runner.invoke(main, ["format", "cpf", "abc"]).exit_code, 1)

    def test_normalize(self):
        result = self.runner.invoke(main, ["normalize", "  User@Example.COM "])
        self.assertEqual(result.output.strip(), "user@example.com")

    def test_generate(self):
        result = self.runner.invoke(main, ["generate", "cnpj", "--count", "3"])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.split()
        self.assertEqual(len(lines), 3)
        for cnpj in lines:
            self.assertTrue(CNPJValidator().validate(cnpj))
            self.assertEqual(cnpj[8:12], "0001")

    def test_generate_masked(self):
        result = self.runner.invoke(main, ["generate", "cpf", "--masked"])
        self.assertEqual(result.exit_code, 0, result.output)
        cpf = result.output.strip()
        self.assertRegex(cpf, r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")
        self.assertTrue(CPFValidator().validate(cpf))

    def test_check_record(self):
        result = self.runner.invoke(main, [
            "check", "--email", "user@example.com", "--password", "Xk9#mQ2@Lp",
            "--document", "529.982.247-25", "--json",
        ])
        self.assertEqual(result.exit_code, 0, result.output)
        report = json.loads(result.output)
        self.assertTrue(report["valid"])
        self.assertEqual(report["fields"], ["cpf", "email", "password"])

    def test_check_invalid_record(self):
        result = self.runner.invoke(main, ["check", "--password", "Passw0rd12"])
        self.assertEqual(result.exit_code, 1)

    def test_check_requires_a_field(self):
        result = self.runner.invoke(main, ["check"])
        self.assertEqual(result.exit_code, 1)

    def test_batch(self):
        with self.runner.isolated_filesystem():
            with open("records.csv", "w", encoding="utf-8") as f:
                f.write("email,password,document\n")
                f.write("user@example.com,Xk9#mQ2@Lp,529.982.247-25\n")
                f.write("a..b@example.com,Xk9#mQ2@Lp,11.222.333/0001-81\n")
            result = self.runner.invoke(main, ["batch", "records.csv", "--json"])
        self.assertEqual(result.exit_code, 1, result.output)
        reports = json.loads(result.output)
        self.assertEqual([r["row"] for r in reports], [1, 2])
        self.assertTrue(reports[0]["valid"])
        self.assertFalse(reports[1]["valid"])

    def test_batch_table(self):
        with self.runner.isolated_filesystem():
            with open("records.csv", "w", encoding="utf-8") as f:
                f.write("email,document\n")
                f.write("user@example.com,11.222.333/0001-81\n")
            result = self.runner.invoke(main, ["batch", "records.csv"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("1 valid, 0 invalid", result.output)

    def test_service(self):
        result = self.runner.invoke(main, [
            "service", "--email", "contato@empresa.com", "--password", "Xk9#mQ2@Lp",
            "--cnpj", "11.222.333/0001-81",
        ])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertTrue(data["success"])
        self.assertEqual(data["data"]["processed"]["masked_cnpj"], "11.222.333/0001-81")

    def test_service_rejects_invalid_input(self):
        result = self.runner.invoke(main, [
            "service", "--email", "contato@empresa.com", "--password", "weak",
            "--cnpj", "11.222.333/0001-81",
        ])
        self.assertEqual(result.exit_code, 1)
        self.assertIn('"success": false', result.output)

    def test_list(self):
        result = self.runner.invoke(main, ["list"])
        self.assertEqual(result.exit_code, 0, result.output)
        for name in ("CNPJ", "CPF", "Email", "Password"):
            self.assertIn(name, result.output)


if __name__ == '__main__':
    unittest.main()
