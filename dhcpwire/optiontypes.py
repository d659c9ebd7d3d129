# SPDX-License-Identifier: MIT

__all__ = ['TypeRegistry']


class TypeRegistry:
	"""Ordered set of option tag enumerations.

	Looking up a tag returns the member of the first registered enumeration
	that knows it, so `get(53)` comes back as a named member rather than a
	bare int wherever possible.
	"""

	def __init__(self, ntypes=256):
		self.ntypes = ntypes
		self.option_types = []

	def register(self, OptionType, priority=None):
		if priority is None:
			priority = len(self.option_types)
		self.option_types.insert(priority, OptionType)

	def unregister(self, OptionType):
		if OptionType in self.option_types:
			self.option_types.remove(OptionType)

	def get(self, value, ignore_unknown=False):
		if isinstance(value, bool):
			raise TypeError('%r is not an option tag' % (value,))
		tag = int(value)
		if tag not in range(self.ntypes):
			raise ValueError('%d not in range(%d)' % (tag, self.ntypes))
		for OptionType in self.option_types:
			try:
				return OptionType(tag)
			except ValueError:
				continue
		if not ignore_unknown:
			raise ValueError('%d is not known to any registered option type'
				% tag)
		return tag

# NOTE(tori): option tag enumerations SHOULD be named <name>OptionType and be
# a subclass of enum.IntEnum

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
