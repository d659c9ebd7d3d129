# SPDX-License-Identifier: MIT

__all__ = ['RFC3046OptionType', 'RelayAgentSubOptionType',
	'RelayAgentSubOption', 'rfc3046_option_codec']

import enum
from collections import namedtuple

from ..option_codecs import OptionCodec, OptionKind, Codec, coerce_bytes
from .optiontypes import register as register_optiontype
from .option_codecs import register as register_optioncodec


@enum.unique
class RFC3046OptionType(enum.IntEnum):
	RELAY_AGENT_INFORMATION = 82


@enum.unique
class RelayAgentSubOptionType(enum.IntEnum):
	CIRCUIT_ID = 1
	REMOTE_ID = 2


RelayAgentSubOption = namedtuple('RelayAgentSubOption', 'code data')


def get_suboption_type(code):
	# NOTE(tori): unknown sub-options keep their raw code so they can be
	# relayed back untouched
	try:
		return RelayAgentSubOptionType(code)
	except ValueError:
		return code


def coerce_suboptions(values):
	if isinstance(values, (str, bytes)):
		raise TypeError('expected a list of sub-options, got %s'
			% type(values).__name__)
	result = []
	for code, data in values:
		if isinstance(code, bool):
			raise TypeError('sub-option code must be an integer')
		code = int(code)
		if code not in range(0x100):
			raise ValueError('sub-option code %d not in range(0x100)' % code)
		data = coerce_bytes(data)
		if len(data) > 0xFF:
			raise ValueError('sub-option %d is %d bytes long, at most 255'
				' fit' % (code, len(data)))
		result.append(RelayAgentSubOption(get_suboption_type(code), data))
	return result


def encode_suboptions(decoded):
	return b''.join(bytes([code, len(data)]) + data for code, data in decoded)


def decode_suboptions(encoded):
	result = []
	offset = 0
	while offset < len(encoded):
		if offset + 2 > len(encoded):
			raise ValueError('sub-option at offset %d has no length byte'
				% offset)
		code, length = encoded[offset], encoded[offset + 1]
		start = offset + 2
		if start + length > len(encoded):
			raise ValueError('sub-option %d declares %d bytes, only %d remain'
				% (code, length, len(encoded) - start))
		result.append(RelayAgentSubOption(get_suboption_type(code),
			bytes(encoded[start:start + length])))
		offset = start + length
	return result


rfc3046_option_codec = Codec(
	name='rfc3046',
	codecs={
		RFC3046OptionType.RELAY_AGENT_INFORMATION: OptionCodec(
			OptionKind.SUBOPTIONS,
			encode_suboptions,
			decode_suboptions,
			coercer=coerce_suboptions,
			min_length=2
		),
	}
)

register_optiontype(RFC3046OptionType)
register_optioncodec(rfc3046_option_codec)

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
