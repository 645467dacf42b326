"""Pure conversion algorithms. Import from the submodules or from cl_image_converter.algorithms."""
