"""Allow running the preview server with: python -m humanizer"""

from humanizer.preview_server import main

if __name__ == '__main__':
    main()
