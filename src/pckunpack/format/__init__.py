"""Binary format layer: primitives, header, directory, compiled textures."""
