"""Control model: descriptors, control state, channel and bank."""
