import unittest

from acalc.lang.error import Span, UnexpectedCharacter
from acalc.pure.lexical import Integer, Lexer, Operator, Token, lex


def to_list(text):
    """Lexes text into a list, raising if any of the tokens causes an error."""
    return list(lex(text))


class LexerTestCase(unittest.TestCase):

    def test_integers(self):
        should_pass = ["32", "5", "0", "007", "12345678901234567890"]
        for case in should_pass:
            self.assertEqual([Integer(case)], to_list(case), case)

    def test_tokens(self):
        cases = {
            "": [],
            "   ": [],
            "33 6": [Integer("33"), Integer("6")],
            "7 16": [Integer("7"), Integer("16")],
            "34 + 61": [Integer("34"), Operator("+"), Integer("61")],
            "8+160": [Integer("8"), Operator("+"), Integer("160")],
            "+ +": [Operator("+"), Operator("+")],
            "3\n4\t5\r\n": [Integer("3"), Integer("4"), Integer("5")],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, to_list(case), case)

    def test_spans(self):
        cases = {
            "81 + 2": [Span(0, 2), Span(3, 1), Span(5, 1)],
            "  123+4": [Span(2, 3), Span(5, 1), Span(6, 1)],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, [token.span for token in lex(case)], case)

    def test_unexpected_character(self):
        cases = {
            "`": ("`", Span(0, 1)),
            "1 - 2": ("-", Span(2, 1)),
            "3\n4\n87 'sd": ("'", Span(7, 1)),
            "12\U0001F4A6": ("\U0001F4A6", Span(2, 4)),
            "\U0001F4A6x": ("\U0001F4A6", Span(0, 4)),
            "é x": ("é", Span(0, 2)),
            "é 1 x": ("é", Span(0, 2)),
            "1 é x": ("é", Span(2, 2)),
        }
        for case, (char, span) in cases.items():
            with self.assertRaises(UnexpectedCharacter, msg=case) as context:
                to_list(case)
            self.assertEqual(char, context.exception.char, case)
            self.assertEqual(span, context.exception.span, case)
            self.assertEqual(case, context.exception.source.text, case)

    def test_stops_after_error(self):
        cases = {"33 6 ' 5 5": 2, "7 16 52 ' 9 8": 3, "3\n4\n87 'sd": 3, "x 1 2": 0}
        for case, before_error in cases.items():
            lexer = Lexer(case)
            for __ in range(before_error):
                self.assertIsInstance(next(lexer), Integer, case)

            self.assertRaises(UnexpectedCharacter, next, lexer)
            self.assertTrue(lexer.halted, case)
            self.assertEqual([], list(lexer), case)

    def test_source_name(self):
        with self.assertRaises(UnexpectedCharacter) as context:
            to_list("1 ! 2")
        self.assertEqual("<stdin>", context.exception.source.name)

        with self.assertRaises(UnexpectedCharacter) as context:
            list(lex("1 ! 2", name="sums.txt"))
        self.assertEqual("sums.txt", context.exception.source.name)

    def test_token_equality(self):
        self.assertEqual(Integer("1", Span(0, 1)), Integer("1", Span(4, 1)))
        self.assertNotEqual(Integer("1"), Integer("2"))
        self.assertNotEqual(Integer("1"), Operator("1"))
        self.assertEqual("34", str(Integer("34")))
        self.assertEqual("+", str(Operator("+")))

    def test_token_is_abstract(self):
        self.assertRaises(TypeError, Token)
        for token in [Integer("1"), Operator("+")]:
            self.assertIsInstance(token, Token)


if __name__ == '__main__':
    unittest.main()
