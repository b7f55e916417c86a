"""
The host side of things: what a read-eval-print loop would sit upon.

A session keeps one environment alive across many inputs.
When an input fails, to compile or to run, the session reports it and carries on;
the half-finished machine state is simply dropped.
"""
import sys
from typing import Iterable, Optional
from . import compiler, evaluator, syntax
from .diagnostics import Report, CompileError, RunTimeError, TooManyIssues
from .environment import Environment
from .instruction import EMPTY, VALUE, disassemble

class Session:
	def __init__(self, report:Optional[Report]=None, environment:Optional[Environment]=None):
		self.report = report or Report(verbose=0)
		self.environment = environment or Environment()

	def run(self, expr) -> Optional[VALUE]:
		"""
		Compile and evaluate one expression (or anything syntax.from_datum accepts).
		Returns the value, or None if there was a problem, which goes in the report.
		Should the report fill up, it goes to the console and starts over empty.
		"""
		try: return self._run(expr)
		except TooManyIssues:
			self.report.complain_to_console()
			self.report.reset()
			return None

	def _run(self, datum) -> Optional[VALUE]:
		try: expr = syntax.from_datum(datum)
		except TypeError as ex:
			self.report.not_an_expression(datum, ex)
			return None
		try: code = compiler.compile(expr)
		except CompileError as ex:
			self.report.compile_failed(expr, ex)
			return None
		self.report.info(disassemble(code))
		try: return evaluator.evaluate(code, self.environment, self.report)
		except RunTimeError as ex:
			self.report.run_failed(code, ex)
			return None

	def run_all(self, exprs:Iterable) -> Optional[VALUE]:
		result = None
		for expr in exprs:
			result = self.run(expr)
		return result

	@staticmethod
	def display(value:Optional[VALUE], file=None):
		if value is None or value is EMPTY: return
		print(value, file=file or sys.stdout)
