"""
Entry Point Script (Bootstrap)
==============================
Development runner that works without installing the package.

It sits outside the 'src' package and puts 'src' on 'sys.path' so that
'from shapemorph...' resolves.

Usage:
    $ python run.py --shape Cube --morph-to Torus
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from shapemorph.main import main

if __name__ == "__main__":
    sys.exit(main())
