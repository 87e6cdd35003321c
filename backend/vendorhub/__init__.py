"""VendorHub - marketplace coordination backend for small food vendors"""
