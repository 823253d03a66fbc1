"""
The MODEL layer contains the pure numpy geometry code.
It has NO knowledge of the Visualization (PyVista).
It deals with shape profiles, surface properties, morphing and the
vertex buffer.
"""
