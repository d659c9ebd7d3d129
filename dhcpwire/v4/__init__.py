"""dhcpwire.v4

DHCPv4 wire format: options, packets and the message exchange

"""

__author__ = 'Tori Wolf <wiredwolf@wiredwolf.gg>'
__date__ = '2023-09-07'
# SPDX-License-Identifier: MIT
__license__ = 'MIT'
__copyright__ = '2023 Tori Wolf'

from .message import *
from .message import __all__ as message_all
from .messaging import *
from .messaging import __all__ as messaging_all
from .options import *
from .options import __all__ as options_all
from .rfc2132 import *
from .rfc2132 import __all__ as rfc2132_all
from .rfc3046 import *
from .rfc3046 import __all__ as rfc3046_all
from .optiontypes import (register as register_type,
	unregister as unregister_type, get as get_option)
from .option_codecs import (register as register_codec,
	unregister as unregister_codec, get as get_codec,
	encode as encode_option, decode as decode_option)

option_codecs_all = ['register_codec', 'unregister_codec', 'get_codec',
	'encode_option', 'decode_option']

optiontypes_all = ['register_type', 'unregister_type', 'get_option']

__all__ = [
	*message_all,
	*messaging_all,
	*options_all,
	*rfc2132_all,
	*rfc3046_all,
	*option_codecs_all,
	*optiontypes_all
]

# NOTE(tori): rfc2131 - done
# NOTE(tori): rfc2132 - done
# NOTE(tori): rfc3046 - done, sub-options are not interpreted further
# NOTE(tori): rfc3396 - done
# NOTE(tori): option overload is decoded but sname/file are never re-parsed

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
