import matplotlib

# Headless backend for figure tests.
matplotlib.use("Agg")
