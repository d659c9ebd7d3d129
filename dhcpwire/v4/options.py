# SPDX-License-Identifier: MIT

__all__ = ['Option', 'OptionSet']

import copy
import logging
from collections.abc import Mapping

# NOTE(tori): the rfc2132 and rfc3046 imports register their option types and
# codecs, so don't remove them
from .rfc2132 import RFC2132OptionType
from . import rfc3046
from .optiontypes import get as get_option
from .option_codecs import (get as get_codec, kind as option_kind,
	coerce as coerce_option, encode as encode_option,
	decode as decode_option)
from ..option_codecs import OptionKind, RAW_CODEC
from ..error import (OptionParseError, OptionConversionError,
	OptionNotFoundError)

logger = logging.getLogger(__name__)

PAD = RFC2132OptionType.PAD
END = RFC2132OptionType.END

INTEGER_KINDS = frozenset({OptionKind.UINT8, OptionKind.UINT16,
	OptionKind.UINT32, OptionKind.INT32, OptionKind.ENUM})


def normalize_tag(tag):
	try:
		return get_option(tag, ignore_unknown=True)
	except (TypeError, ValueError):
		raise OptionConversionError(tag, 'not an option tag') from None


class Option:
	"""A single option: a tag and a value of the tag's declared kind.

	The value is coerced on construction, so `Option(53, 5).value` is
	`MessageType.ACK` and `Option(3, ['10.0.0.1'])` holds an `IPv4Address`.
	"""

	__slots__ = ('tag', 'value')

	def __init__(self, tag, value=None):
		self.tag = normalize_tag(tag)
		self.value = coerce_option(self.tag, value)

	@classmethod
	def decode(cls, tag, payload):
		self = cls.__new__(cls)
		self.tag = normalize_tag(tag)
		self.value = decode_option(self.tag, payload)
		return self

	@property
	def kind(self):
		return option_kind(self.tag)

	def encode(self):
		return encode_option(self.tag, self.value)

	def _expect(self, *kinds):
		if self.kind not in kinds:
			raise OptionConversionError(self.tag, 'value is %s, not %s'
				% (self.kind.value, ' or '.join(kind.value for kind in kinds)))
		return self.value

	def as_ipv4(self):
		return self._expect(OptionKind.IPV4)

	def as_ipv4_list(self):
		return list(self._expect(OptionKind.IPV4_LIST))

	def as_text(self):
		return self._expect(OptionKind.TEXT)

	def as_bool(self):
		return self._expect(OptionKind.BOOL)

	def as_int(self):
		return int(self._expect(*INTEGER_KINDS))

	def as_int_list(self):
		return list(self._expect(OptionKind.UINT16_LIST))

	def as_bytes(self):
		return self._expect(OptionKind.BYTES)

	def __eq__(self, other):
		if not isinstance(other, Option):
			return NotImplemented
		return self.tag == other.tag and self.value == other.value

	__hash__ = None

	def __repr__(self):
		return '%s(%s, %r)' % (type(self).__name__,
			getattr(self.tag, 'name', self.tag), self.value)


class OptionSet:
	"""Options of one packet, at most one per tag.

	Iteration and serialization always run in ascending tag order no matter
	the order options were added in. Pad and End are framing, never stored.
	"""

	NTAGS = 256

	def __init__(self, options=None):
		self._slots = [None]*self.NTAGS
		if options is None:
			return
		if isinstance(options, OptionSet):
			self._slots = list(options._slots)
		elif isinstance(options, Mapping):
			for tag, value in options.items():
				self[tag] = value
		else:
			for option in options:
				if not isinstance(option, Option):
					raise TypeError('not supported: %r' % (option,))
				self.upsert(option)

	def upsert(self, option):
		if option.tag in (PAD, END):
			return
		self._slots[option.tag] = option

	def upsert_optional(self, option):
		if option is not None:
			self.upsert(option)

	def remove(self, tag):
		self._slots[normalize_tag(tag)] = None

	def merge(self, other):
		if not isinstance(other, OptionSet):
			other = OptionSet(other)
		for option in other:
			self.upsert(option)

	def option(self, tag):
		return self._slots[normalize_tag(tag)]

	def get(self, tag, default=None):
		option = self.option(tag)
		if option is None:
			return default
		return option.value

	def require(self, tag, kind=None):
		option = self.option(tag)
		if option is None:
			raise OptionNotFoundError(normalize_tag(tag))
		if kind is not None:
			option._expect(OptionKind(kind))
		return option.value

	def __getitem__(self, tag):
		return self.require(tag)

	def __setitem__(self, tag, value):
		self.upsert(Option(tag, value))

	def __delitem__(self, tag):
		tag = normalize_tag(tag)
		if self._slots[tag] is None:
			raise OptionNotFoundError(tag)
		self._slots[tag] = None

	def __contains__(self, tag):
		try:
			return self.option(tag) is not None
		except OptionConversionError:
			return False

	def __iter__(self):
		return (option for option in self._slots if option is not None)

	def __len__(self):
		return sum(1 for _ in self)

	def tags(self):
		return [option.tag for option in self]

	def items(self):
		return [(option.tag, option.value) for option in self]

	def __eq__(self, other):
		if not isinstance(other, OptionSet):
			return NotImplemented
		return self._slots == other._slots

	__hash__ = None

	def __repr__(self):
		return '%s(%r)' % (type(self).__name__, list(self))

	def copy(self):
		return copy.deepcopy(self)

	def to_bytes(self):
		return b''.join(option.encode() for option in self) + bytes([END])

	@classmethod
	def from_bytes(cls, data):
		data = bytes(data)
		# NOTE(tori): dicts keep insertion order, which is the order the tags
		# first appeared in; rfc3396 says repeats are concatenated
		payloads = {}
		offset = 0
		while True:
			if offset >= len(data):
				logger.debug('option stream of %d bytes has no end tag',
					len(data))
				break
			tag = data[offset]
			if tag == PAD:
				offset += 1
				continue
			if tag == END:
				break
			if offset + 1 >= len(data):
				raise OptionParseError(normalize_tag(tag),
					'missing length byte at offset %d' % offset)
			length = data[offset + 1]
			start = offset + 2
			if start + length > len(data):
				raise OptionParseError(normalize_tag(tag), 'declares %d bytes,'
					' only %d remain' % (length, len(data) - start))
			if tag in payloads:
				logger.debug('concatenating repeated option %d', tag)
				payloads[tag] += data[start:start + length]
			else:
				payloads[tag] = data[start:start + length]
			offset = start + length

		self = cls()
		for tag, payload in payloads.items():
			if get_codec(tag) is RAW_CODEC:
				logger.debug('unknown option %d kept as %d raw bytes', tag,
					len(payload))
			self.upsert(Option.decode(tag, payload))
		return self

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
