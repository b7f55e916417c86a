"""
Simplest possible environment concept.

This is the canonical list-structured search:
each environment has its own table of bindings and (maybe) a parent.
Definitions always land in the local table;
look-ups and assignments walk outward until they find the name.
"""
from typing import Optional
from .diagnostics import RunTimeError
from .instruction import VALUE

class UnboundName(RunTimeError, KeyError):
	def __str__(self): return "unbound name: %r"%self.args[0]

class Environment:
	_table: dict[str, VALUE]
	parent: Optional["Environment"]

	def __init__(self, bindings:Optional[dict[str, VALUE]]=None, parent:Optional["Environment"]=None):
		self._table = dict(bindings or ())
		self.parent = parent

	def child(self) -> "Environment":
		return Environment(parent=self)

	def _chain(self):
		env = self
		while env is not None:
			yield env
			env = env.parent

	def define(self, name:str, value:VALUE):
		self._table[name] = value

	def resolve(self, name:str) -> dict[str, VALUE]:
		""" The table of the nearest scope that binds this name. """
		for env in self._chain():
			if name in env._table: return env._table
		raise UnboundName(name)

	def assign(self, name:str, value:VALUE):
		self.resolve(name)[name] = value

	def lookup(self, name:str) -> VALUE:
		return self.resolve(name)[name]

	def is_defined(self, name:str) -> bool:
		return any(name in env._table for env in self._chain())

	def __str__(self):
		lines = []
		for depth, env in enumerate(self._chain()):
			bindings = ", ".join("%s: %s"%(k, v) for k, v in env._table.items())
			lines.append("%s{%s}"%("  "*depth, bindings))
		return "\n".join(lines)
