# SPDX-License-Identifier: MIT

from ..option_codecs import CodecRegistry

registry = CodecRegistry()

register = registry.register
unregister = registry.unregister
get = registry.get
kind = registry.kind
coerce = registry.coerce
encode = registry.encode
decode = registry.decode
decode_min = registry.decode_min

# vim:set ft=python ts=4 sw=4 ai noet cc=80:
