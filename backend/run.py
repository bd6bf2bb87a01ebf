from playsib import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server so live sessions get their tickers in dev
    socketio.run(app, debug=True)
