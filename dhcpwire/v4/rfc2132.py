# SPDX-License-Identifier: MIT

__all__ = ['RFC2132OptionType', 'rfc2132_option_codec', 'MessageType',
	'NetBIOSNodeType', 'Overload', 'PolicyFilter', 'StaticRoute',
	'ClientIdentifier', 'DHCP_MAGIC_COOKIE', 'MINIMUM_MESSAGE_SIZE']

from .rfc2132optiontype import RFC2132OptionType
from .rfc2132_option_codec import (rfc2132_option_codec, MessageType,
	NetBIOSNodeType, Overload, PolicyFilter, StaticRoute, ClientIdentifier,
	DHCP_MAGIC_COOKIE, MINIMUM_MESSAGE_SIZE)

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
