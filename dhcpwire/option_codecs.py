# SPDX-License-Identifier: MIT

__all__ = ['CodecError', 'OptionKind', 'OptionCodec', 'Codec',
	'CodecRegistry', 'MAX_OPTION_LENGTH', 'RAW_CODEC', 'identity',
	'coerce_bytes']

import enum
import struct

from .error import OptionParseError, OptionValueError, OptionConversionError

MAX_OPTION_LENGTH = 255


class CodecError(Exception):
	pass


@enum.unique
class OptionKind(enum.Enum):
	"""The closed set of value shapes an option payload can take"""
	EMPTY = 'empty'
	IPV4 = 'ipv4'
	IPV4_LIST = 'ipv4 list'
	IPV4_PAIRS = 'ipv4 pair list'
	TEXT = 'text'
	BOOL = 'bool'
	UINT8 = 'uint8'
	UINT16 = 'uint16'
	UINT32 = 'uint32'
	INT32 = 'int32'
	UINT16_LIST = 'uint16 list'
	BYTES = 'bytes'
	ENUM = 'enum'
	CLIENT_IDENTIFIER = 'client identifier'
	SUBOPTIONS = 'suboptions'


def identity(value):
	return value


def coerce_bytes(value):
	# NOTE(tori): bytes(5) is five NULs and bytes('x') needs an encoding,
	# neither of which is what a caller handing us an option payload meant
	if isinstance(value, (int, str)):
		raise TypeError('expected a bytes-like object, got %s'
			% type(value).__name__)
	return bytes(value)


class OptionCodec:
	"""Everything needed to move one option's value on and off the wire.

	`coercer` normalizes caller-supplied values into the kind's canonical
	python type, `encoder` turns a canonical value into payload bytes and
	`decoder` does the reverse. `check` is an optional domain constraint that
	is applied both to decoded values and to constructed ones.
	"""

	# NOTE(tori): decoders are allowed to raise any of these; they are all
	# reported as a parse error for the tag being decoded
	DECODE_ERRORS = (ValueError, TypeError, IndexError, struct.error)

	def __init__(self, kind, encoder, decoder, *, coercer=identity,
		min_length=0, check=None, message=None):
		self.kind = OptionKind(kind)
		self.encoder = encoder
		self.decoder = decoder
		self.coercer = coercer
		self.min_length = min_length
		self.check = check
		self.message = message

	def __repr__(self):
		return '%s(kind=%s, min_length=%d)' % (type(self).__name__,
			self.kind.name, self.min_length)

	def validate(self, tag, value):
		if self.check is not None and not self.check(value):
			raise OptionValueError(tag, self.message
				or 'invalid value: %r' % (value,))
		return value

	def coerce(self, tag, value):
		try:
			value = self.coercer(value)
		except (TypeError, ValueError) as e:
			raise OptionConversionError(tag, 'cannot convert %r to %s (%s)'
				% (value, self.kind.value, e)) from None
		self.validate(tag, value)
		# NOTE(tori): a coerced value must be writable and must read back,
		# so the payload has to satisfy the same minimum the decoder enforces
		payload = self.encode(tag, value)
		if len(payload) < self.min_length:
			raise OptionValueError(tag, 'encoded value is %d bytes, expected'
				' at least %d' % (len(payload), self.min_length))
		return value

	def encode(self, tag, value):
		try:
			return bytes(self.encoder(value))
		except (TypeError, ValueError, struct.error) as e:
			raise OptionConversionError(tag, 'cannot encode %r as %s (%s)'
				% (value, self.kind.value, e)) from None

	def decode(self, tag, encoded, min_length=None):
		encoded = bytes(encoded)
		if min_length is None:
			min_length = self.min_length
		if len(encoded) < min_length:
			raise OptionParseError(tag, 'expected at least %d bytes, got %d'
				% (min_length, len(encoded)))
		try:
			value = self.decoder(encoded)
		except self.DECODE_ERRORS as e:
			raise OptionParseError(tag, 'malformed %s payload %r (%s)'
				% (self.kind.value, encoded, e)) from None
		return self.validate(tag, value)


RAW_CODEC = OptionCodec(OptionKind.BYTES, identity, bytes,
	coercer=coerce_bytes)


class Codec:
	def __init__(self, *, name=None, codecs=None):
		if name is None:
			name = 'codec_%s' % id(self)
		self.name = name
		if codecs is None:
			codecs = {}
		self.codecs = codecs

	def __repr__(self):
		return '%s(name=%r, tags=%r)' % (type(self).__name__, self.name,
			sorted(int(tag) for tag in self.codecs))

	def get_codec(self, option):
		try:
			return self.codecs[option]
		except KeyError:
			raise CodecError('option %r cannot be encoded by this codec (%s)'
				% (option, self.name)
			) from None


class CodecRegistry:
	def __init__(self):
		self.option_codecs = []

	def register(self, option_codec, priority=None):
		if not isinstance(option_codec, Codec):
			raise CodecError('%r is not an instance of Codec' % option_codec)
		if priority is None:
			priority = len(self.option_codecs)
		self.option_codecs.insert(priority, option_codec)

	def unregister(self, option_codec):
		try:
			self.option_codecs.remove(option_codec)
		except ValueError:
			pass

	def get(self, option, ignore_unknown=True):
		for option_codec in self.option_codecs:
			try:
				return option_codec.get_codec(option)
			except CodecError:
				continue
		else:
			if ignore_unknown:
				return RAW_CODEC
			else:
				raise CodecError(
					'%r is not a valid option for all registered option codecs'
					% option
				)

	def kind(self, option):
		return self.get(option).kind

	def coerce(self, option, value):
		return self.get(option).coerce(option, value)

	def encode_payload(self, option, value):
		return self.get(option).encode(option, value)

	def encode(self, option, value):
		"""Encode `value` as a complete tag-length-value run.

		Pad and End are a single tag byte. Payloads that do not fit a single
		length byte are split into consecutive runs of the same tag
		(RFC 3396).
		"""
		option_codec = self.get(option)
		tag = int(option)
		if option_codec.kind is OptionKind.EMPTY:
			return bytes([tag])
		payload = option_codec.encode(option, value)
		if not payload:
			return bytes([tag, 0])
		encoded = bytearray()
		for i in range(0, len(payload), MAX_OPTION_LENGTH):
			chunk = payload[i:i + MAX_OPTION_LENGTH]
			encoded += bytes([tag, len(chunk)]) + chunk
		return bytes(encoded)

	def decode(self, option, encoded):
		return self.get(option).decode(option, encoded)

	def decode_min(self, option, encoded, min_length):
		return self.get(option).decode(option, encoded, min_length)

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
