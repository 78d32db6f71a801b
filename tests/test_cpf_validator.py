import random
import re
import unittest

from pybrcheck.core.config import Config
from pybrcheck.core.exceptions import GenerationError, InvalidInputError, InvalidLengthError
from pybrcheck.validators.cpf_validator import CPFValidator

VALID_CPF = "52998224725"


class ConstantRandom(random.Random):
    """A random source that always draws the same digit."""

    def randrange(self, *args, **kwargs):
        return 7


class TestCPFValidator(unittest.TestCase):

    def setUp(self):
        self.validator = CPFValidator()

    def test_valid_cpf_unmasked_and_masked(self):
        self.assertTrue(self.validator.validate(VALID_CPF))
        self.assertTrue(self.validator.validate("529.982.247-25"))
        self.assertTrue(self.validator.validate(" 529 982 247 25 "))
        self.assertTrue(self.validator.validate("111.444.777-35"))

    def test_wrong_check_digits(self):
        self.assertFalse(self.validator.validate("529.982.247-26"))
        self.assertFalse(self.validator.validate("529.982.247-15"))

    def test_wrong_length_is_false(self):
        self.assertFalse(self.validator.validate(""))
        self.assertFalse(self.validator.validate("5299822472"))
        self.assertFalse(self.validator.validate("529982247250"))

    def test_blacklisted_sequences_are_rejected(self):
        """Repeated-digit CPFs pass the checksum but are still invalid."""
        for digit in "0123456789":
            self.assertFalse(self.validator.validate(digit * 11))
        self.assertEqual(self.validator.explain("000.000.000-00"), ["CPF cannot be a single repeated digit."])

    def test_non_string_input_raises(self):
        with self.assertRaises(InvalidInputError):
            self.validator.validate(None)
        with self.assertRaises(InvalidInputError):
            self.validator.validate(52998224725)
        with self.assertRaises(TypeError):
            self.validator.validate(["529.982.247-25"])

    def test_every_single_digit_corruption_is_caught(self):
        """Exhaustively substitutes each digit of a known CPF."""
        for position in range(11):
            for digit in "0123456789":
                if digit == VALID_CPF[position]:
                    continue
                corrupted = VALID_CPF[:position] + digit + VALID_CPF[position + 1:]
                self.assertFalse(self.validator.validate(corrupted), corrupted)

    def test_most_single_digit_corruptions_are_caught_for_generated_cpfs(self):
        rng = random.Random(2024)
        for _ in range(25):
            cpf = self.validator.generate(rng)
            for position in range(11):
                caught = sum(
                    1 for digit in "0123456789"
                    if digit != cpf[position]
                    and not self.validator.validate(cpf[:position] + digit + cpf[position + 1:])
                )
                self.assertGreaterEqual(caught, 8, f"{cpf} at position {position}")

    def test_mask(self):
        self.assertEqual(self.validator.mask(VALID_CPF), "529.982.247-25")
        self.assertEqual(self.validator.mask("529.982.247-25"), "529.982.247-25")

    def test_unmask(self):
        self.assertEqual(self.validator.unmask("529.982.247-25"), VALID_CPF)
        self.assertEqual(self.validator.unmask(VALID_CPF), VALID_CPF)

    def test_mask_unmask_round_trip(self):
        masked = self.validator.mask(VALID_CPF)
        self.assertEqual(self.validator.unmask(masked), VALID_CPF)
        self.assertEqual(self.validator.mask(self.validator.unmask(masked)), masked)

    def test_mask_does_not_check_digits(self):
        self.assertEqual(self.validator.mask("12345678900"), "123.456.789-00")

    def test_mask_and_unmask_enforce_length(self):
        with self.assertRaises(InvalidLengthError):
            self.validator.mask("123")
        with self.assertRaises(InvalidLengthError):
            self.validator.unmask("529.982.247-255")
        with self.assertRaises(ValueError):
            self.validator.unmask("")

    def test_mask_and_unmask_reject_non_strings(self):
        with self.assertRaises(InvalidInputError):
            self.validator.mask(None)
        with self.assertRaises(InvalidInputError):
            self.validator.unmask(52998224725)

    def test_is_valid_format(self):
        self.assertTrue(self.validator.is_valid_format(""))
        self.assertTrue(self.validator.is_valid_format("123"))
        self.assertTrue(self.validator.is_valid_format("529.98"))
        self.assertTrue(self.validator.is_valid_format("529.982.247-2"))
        self.assertTrue(self.validator.is_valid_format("529.982.247-25"))
        self.assertTrue(self.validator.is_valid_format(VALID_CPF))

    def test_is_valid_format_rejects_garbage(self):
        self.assertFalse(self.validator.is_valid_format("abc"))
        self.assertFalse(self.validator.is_valid_format("5299"))
        self.assertFalse(self.validator.is_valid_format("529.982.247-255"))
        self.assertFalse(self.validator.is_valid_format("529.982.247-25\n"))
        self.assertFalse(self.validator.is_valid_format(None))
        self.assertFalse(self.validator.is_valid_format(52998224725))

    def test_is_valid_format_only_accepts_ascii_digits(self):
        arabic_indic = "\u0665\u0662\u0669\u0669\u0668\u0662\u0662\u0664\u0667\u0662\u0665"
        self.assertFalse(self.validator.is_valid_format(arabic_indic))
        self.assertFalse(self.validator.validate(arabic_indic))
        self.assertFalse(self.validator.is_valid_format("\uff11\uff12"))

    def test_generate_produces_valid_cpfs(self):
        rng = random.Random(1)
        for _ in range(200):
            cpf = self.validator.generate(rng)
            self.assertRegex(cpf, re.compile(r"^\d{11}$"))
            self.assertTrue(self.validator.validate(cpf))

    def test_generate_gives_up_after_max_attempts(self):
        """A random source stuck on one digit only ever yields repeated bases."""
        config = Config.defaults()
        config.set("generation.max_attempts", 5)
        validator = CPFValidator(config)
        with self.assertRaises(GenerationError):
            validator.generate(ConstantRandom())

    def test_check_result(self):
        result = self.validator.check("529.982.247-25")
        self.assertTrue(result["valid"])
        self.assertEqual(result["name"], "CPF")
        self.assertEqual(result["field"], "cpf")
        self.assertEqual(result["errors"], [])
        self.assertEqual(result["info"], {"masked": "529.982.247-25", "unmasked": VALID_CPF})

    def test_check_warns_about_ignored_characters(self):
        result = self.validator.check("CPF 529.982.247-25")
        self.assertTrue(result["valid"])
        self.assertEqual(len(result["warnings"]), 1)

    def test_check_reports_failures(self):
        result = self.validator.check("123")
        self.assertFalse(result["valid"])
        self.assertEqual(result["errors"], ["CPF must have 11 digits, got 3."])
        self.assertEqual(result["info"], {})


if __name__ == '__main__':
    unittest.main()
