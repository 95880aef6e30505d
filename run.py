import argparse
import os

from demo import create_app

# Create the Flask application at module level
# This is required for WSGI servers to find the app object
app = create_app()

if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Run the Pinup demo application')
    parser.add_argument('--port', type=int, default=None,
                        help='Port to run the application on (default: PINUP_PORT or 3000)')
    parser.add_argument('--print-setup', action='store_true',
                        help='Print the endpoint and static directory tables on startup')
    args = parser.parse_args()

    if args.port is not None:
        app.pinup.config.port = args.port

    # Debug mode should be controlled by PINUP_ENV, not hardcoded
    debug_mode = os.environ.get('PINUP_ENV', 'development') == 'development'
    app.pinup.run(print_setup_config=args.print_setup, debug=debug_mode)
