"""
The set of expression nodes the compiler knows how to lower.

Some front-end (not part of this package) is expected to build these.
For hosts and tests without one, from_datum builds the same trees from
ordinary nested Python lists, ints, and strings.
"""
from typing import Sequence

class Expression:
	""" Closed family: Constant, StringConstant, BinaryOperation, ExpressionList, Lambda """
	def __repr__(self): return str(self)

class Constant(Expression):
	def __init__(self, value:int):
		assert isinstance(value, int) and not isinstance(value, bool), value
		self.value = value
	def __str__(self): return str(self.value)

class StringConstant(Expression):
	""" A bare identifier. In value position it is a variable reference. """
	def __init__(self, value:str):
		assert isinstance(value, str), value
		self.value = value
	def __str__(self): return self.value

class BinaryOperation(Expression):
	def __init__(self, glyph:str, lhs:Expression, rhs:Expression):
		self.glyph, self.lhs, self.rhs = glyph, lhs, rhs
	def __str__(self): return "(%s %s %s)"%(self.glyph, self.lhs, self.rhs)

class ExpressionList(Expression):
	def __init__(self, expressions:Sequence[Expression]):
		for e in expressions:
			assert isinstance(e, Expression), e
		self.expressions = tuple(expressions)
	def __len__(self): return len(self.expressions)
	def head(self):
		return self.expressions[0] if self.expressions else None
	def __str__(self): return "(%s)"%" ".join(map(str, self.expressions))

class Lambda(Expression):
	def __init__(self, params:Sequence[StringConstant], body:Expression):
		self.params, self.body = tuple(params), body
	def __str__(self):
		return "(lambda (%s) %s)"%(" ".join(map(str, self.params)), self.body)

ARITHMETIC = frozenset("+-*")

def from_datum(datum) -> Expression:
	"""
	ints become Constant; strs become StringConstant; lists become ExpressionList.
	Two shapes get special treatment, since they have their own node types:
	a 3-element list headed by "lambda", or by an arithmetic glyph.
	"""
	if isinstance(datum, Expression):
		return datum
	if isinstance(datum, bool):
		raise TypeError("There are no boolean literals: %r"%datum)
	if isinstance(datum, int):
		return Constant(datum)
	if isinstance(datum, str):
		return StringConstant(datum)
	if isinstance(datum, (list, tuple)):
		head = datum[0] if datum and isinstance(datum[0], str) else None
		if len(datum) == 3 and head in ARITHMETIC:
			return BinaryOperation(datum[0], from_datum(datum[1]), from_datum(datum[2]))
		if len(datum) == 3 and head == "lambda":
			params = datum[1] if isinstance(datum[1], (list, tuple)) else [datum[1]]
			for p in params:
				if not isinstance(p, str):
					raise TypeError("A lambda parameter must be an identifier, not %r"%(p,))
			return Lambda([StringConstant(p) for p in params], from_datum(datum[2]))
		return ExpressionList([from_datum(d) for d in datum])
	raise TypeError("Cannot make an expression from %r"%(datum,))
