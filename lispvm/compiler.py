"""
Lower an expression tree to a flat sequence of instructions.

Each kind of node has its own rule, and the rules compose:
a form's code is its children's code with a few instructions stitched in.
Control flow is nothing more than relative jumps over sibling code,
so the only arithmetic here is counting instructions.

    (if c t f)   ==>   c
                       RELATIVE_JUMP_IF_TRUE  len(f)+1
                       f
                       RELATIVE_JUMP          len(t)
                       t

Both branches are always compiled; only one of them will run.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import CompileError
from .instruction import OpCode, Instruction, Integer, Name, Code

class UnsupportedForm(CompileError):
	def __init__(self, why:str, expr:syntax.Expression):
		super().__init__(why, expr)
		self.expr = expr
	def __str__(self): return "unsupported form: %s in %s"%self.args

BINARY_INSTRUCTION = {
	"+": OpCode.BINARY_ADD,
	"-": OpCode.BINARY_SUB,
	"*": OpCode.BINARY_MUL,
}

def compile(expression:syntax.Expression) -> Code:
	if not isinstance(expression, syntax.Expression):
		raise UnsupportedForm("not an expression", expression)
	return tuple(Compiler().visit(expression))

def _identifier(expr:syntax.Expression):
	""" The text of a bare identifier, or None for anything else. """
	if isinstance(expr, syntax.StringConstant): return expr.value

class Compiler(Visitor):
	"""
	Each visit method returns a fresh list of instructions.
	Nothing is emitted anywhere until the whole tree has lowered without complaint.
	"""

	def visit(self, host, *args, **kwargs):
		if not hasattr(self, "visit_"+type(host).__name__):
			return self.visit_Expression(host)
		return super().visit(host, *args, **kwargs)

	@staticmethod
	def visit_Expression(it:syntax.Expression):
		raise UnsupportedForm("no rule for %s"%type(it).__name__, it)

	@staticmethod
	def visit_Constant(it:syntax.Constant) -> list[Instruction]:
		return [Instruction(OpCode.LOAD_CONST, Integer(it.value))]

	@staticmethod
	def visit_StringConstant(it:syntax.StringConstant) -> list[Instruction]:
		return [Instruction(OpCode.LOAD_NAME, Name(it.value))]

	def visit_BinaryOperation(self, it:syntax.BinaryOperation) -> list[Instruction]:
		try: opcode = BINARY_INSTRUCTION[it.glyph]
		except KeyError: raise UnsupportedForm("no such operator %r"%it.glyph, it) from None
		return self.visit(it.lhs) + self.visit(it.rhs) + [Instruction(opcode)]

	def visit_ExpressionList(self, it:syntax.ExpressionList) -> list[Instruction]:
		keyword = _identifier(it.head())
		if len(it) == 3 and keyword == "val":
			return self._binding(it)
		if len(it) == 4 and keyword == "if":
			return self._conditional(it)
		raise UnsupportedForm("expected (val name expr) or (if cond then else)", it)

	@staticmethod
	def visit_Lambda(it:syntax.Lambda):
		raise UnsupportedForm("functions are not implemented", it)

	def _binding(self, it:syntax.ExpressionList) -> list[Instruction]:
		_, binder, expr = it.expressions
		name = _identifier(binder)
		if name is None:
			raise UnsupportedForm("val must bind an identifier", it)
		return self.visit(expr) + [Instruction(OpCode.STORE_NAME, Name(name))]

	def _conditional(self, it:syntax.ExpressionList) -> list[Instruction]:
		_, cond, then_part, else_part = it.expressions
		cond_code = self.visit(cond)
		true_code = self.visit(then_part)
		false_code = self.visit(else_part)
		return [
			*cond_code,
			Instruction(OpCode.RELATIVE_JUMP_IF_TRUE, Integer(len(false_code) + 1)),
			*false_code,
			Instruction(OpCode.RELATIVE_JUMP, Integer(len(true_code))),
			*true_code,
		]
