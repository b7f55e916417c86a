import unittest

from lispvm import compiler, syntax
from lispvm.compiler import UnsupportedForm
from lispvm.diagnostics import CompileError
from lispvm.instruction import OpCode, Instruction, Integer, Name

def _ins(opcode, arg):
	if isinstance(arg, int): return Instruction(opcode, Integer(arg))
	return Instruction(opcode, Name(arg))

LOAD_CONST = lambda v: _ins(OpCode.LOAD_CONST, v)
LOAD_NAME = lambda v: _ins(OpCode.LOAD_NAME, v)
STORE_NAME = lambda v: _ins(OpCode.STORE_NAME, v)
JUMP = lambda v: _ins(OpCode.RELATIVE_JUMP, v)
JUMP_IF_TRUE = lambda v: _ins(OpCode.RELATIVE_JUMP_IF_TRUE, v)

class LoweringTests(unittest.TestCase):

	def test_integer_literal(self):
		for v in (0, 5, -17, 2**40):
			with self.subTest(v):
				self.assertEqual((LOAD_CONST(v),), compiler.compile(syntax.Constant(v)))

	def test_identifier(self):
		for name in ("x", "cond", "val", "if"):
			with self.subTest(name):
				self.assertEqual((LOAD_NAME(name),), compiler.compile(syntax.StringConstant(name)))

	def test_val(self):
		expr = syntax.ExpressionList([
			syntax.StringConstant("val"),
			syntax.StringConstant("x"),
			syntax.Constant(5),
		])
		self.assertEqual((LOAD_CONST(5), STORE_NAME("x")), compiler.compile(expr))

	def test_val_of_nested_expression(self):
		code = compiler.compile(syntax.from_datum(["val", "y", ["if", "c", 1, 2]]))
		self.assertEqual(6, len(code))
		self.assertEqual(STORE_NAME("y"), code[-1])

	def test_if(self):
		code = compiler.compile(syntax.from_datum(["if", 1, 2, 3]))
		self.assertEqual((
			LOAD_CONST(1),
			JUMP_IF_TRUE(2),
			LOAD_CONST(3),
			JUMP(1),
			LOAD_CONST(2),
		), code)

	def test_if_jumps_count_whole_branches(self):
		code = compiler.compile(syntax.from_datum(["if", "c", ["val", "a", 1], ["if", 0, 7, 8]]))
		# The false branch is itself a five-instruction conditional.
		self.assertEqual(JUMP_IF_TRUE(6), code[1])
		self.assertEqual(JUMP(2), code[7])
		self.assertEqual(10, len(code))

	def test_code_is_immutable(self):
		code = compiler.compile(syntax.Constant(1))
		self.assertIsInstance(code, tuple)

	def test_arithmetic(self):
		code = compiler.compile(syntax.from_datum(["-", ["+", 1, 2], 3]))
		self.assertEqual((
			LOAD_CONST(1),
			LOAD_CONST(2),
			Instruction(OpCode.BINARY_ADD),
			LOAD_CONST(3),
			Instruction(OpCode.BINARY_SUB),
		), code)


class UnsupportedFormTests(unittest.TestCase):

	def expect_failure(self, expr):
		with self.assertRaises(UnsupportedForm) as cm:
			compiler.compile(expr)
		return cm.exception

	def test_bad_shapes(self):
		for datum in [
			[],
			["val"],
			["val", "x"],
			["val", "x", 1, 2, 3],
			["if", 1, 2],
			["let", "x", 5],
			["when", 1, 2, 3],
			[1, "x", 5],
			["val", 7, 5],
			["val", ["x"], 5],
			[["val"], "x", 5],
		]:
			with self.subTest(datum):
				self.expect_failure(syntax.from_datum(datum))

	def test_failure_deep_inside_is_still_failure(self):
		self.expect_failure(syntax.from_datum(["if", 1, ["val", 2, 3], 4]))

	def test_lambda_is_not_implemented(self):
		ex = self.expect_failure(syntax.from_datum([["lambda", "x", ["+", "x", 1]], 1]))
		self.assertIsInstance(ex.expr, syntax.ExpressionList)
		ex = self.expect_failure(syntax.from_datum(["lambda", "x", ["+", "x", 1]]))
		self.assertIsInstance(ex.expr, syntax.Lambda)

	def test_unknown_operator(self):
		self.expect_failure(syntax.BinaryOperation("/", syntax.Constant(1), syntax.Constant(2)))

	def test_node_kind_without_a_rule(self):
		class Quote(syntax.Expression):
			def __str__(self): return "'x"
		ex = self.expect_failure(Quote())
		self.assertIsInstance(ex.expr, Quote)
		nested = syntax.ExpressionList([syntax.StringConstant("if"), Quote(), syntax.Constant(1), syntax.Constant(2)])
		self.expect_failure(nested)

	def test_not_an_expression(self):
		self.expect_failure(5)

	def test_is_a_compile_error(self):
		ex = self.expect_failure(syntax.from_datum(["nope"]))
		self.assertIsInstance(ex, CompileError)
		self.assertIn("unsupported form", str(ex))


class FromDatumTests(unittest.TestCase):

	def test_bad_data(self):
		for datum in [3.5, True, None, ["lambda", [1], 2], ["lambda", 7, 2], ["val", "x", {}]]:
			with self.subTest(datum):
				with self.assertRaises(TypeError):
					syntax.from_datum(datum)

	def test_lambda_parameters(self):
		it = syntax.from_datum(["lambda", ["a", "b"], ["+", "a", "b"]])
		self.assertIsInstance(it, syntax.Lambda)
		self.assertEqual(["a", "b"], [p.value for p in it.params])


if __name__ == '__main__':
	unittest.main()
